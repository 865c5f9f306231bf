"""Domain records, inputs and repository protocols."""
