"""Session helpers shared by the blueprints."""
