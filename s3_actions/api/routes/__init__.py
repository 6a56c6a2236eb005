"""Route modules, one router per concern."""
