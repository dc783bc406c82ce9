"""Domain services for the training registration workflow."""
