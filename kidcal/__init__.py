"""kidcal - tag-aware matching of kids to calendar events."""
