"""External services fleetbox drives: docker, ssh keys and clusters."""
