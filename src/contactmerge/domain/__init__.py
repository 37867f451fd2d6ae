"""Domain layer: contact model, ports and the merge workflow."""
