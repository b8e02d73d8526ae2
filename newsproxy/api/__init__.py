"""HTTP surface of the news proxy."""
