"""Release decision engine and its collaborators."""
