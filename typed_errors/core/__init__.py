"""Core error model, construction options, accessors and ambient wiring."""
