"""Domain layer: events, commands, projections and the message aggregate.

Everything here is pure except ``Message``, which holds its folded
decision state between commands.
"""
