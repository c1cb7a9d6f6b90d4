"""Client services and stores."""
