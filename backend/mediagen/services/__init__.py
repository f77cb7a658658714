"""Generation services: task submission, status polling, normalization."""
