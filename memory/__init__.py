"""Style profile persistence."""
