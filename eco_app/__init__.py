"""EcoWardrobe application session, configuration and logging."""
