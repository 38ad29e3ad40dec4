"""
Advisory helpers built on top of the readings and recommendations.

Modules
-------
irrigation : irrigation_advice() — skip / delay / irrigate rules.
assistant  : Assistant chat session + analyze_query() + translate().
"""
