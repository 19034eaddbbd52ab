"""Digital signage and ticket queue backend."""
