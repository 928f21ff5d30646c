"""Train/test index partitioning (see :func:`.partition.partition`)."""
