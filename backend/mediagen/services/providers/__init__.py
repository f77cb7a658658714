"""Provider client implementations.

Runware is the only provider: submit a task batch, then poll with
``getResponse`` for async deliveries.
"""
