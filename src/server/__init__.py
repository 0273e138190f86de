"""HTTP control surface for the simulation."""
