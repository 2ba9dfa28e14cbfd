"""Interactive front-ends that feed user input into the command registry."""
