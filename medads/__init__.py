"""Medical question classification and sponsored content decisions."""
