"""SmartOps access-control backend."""
