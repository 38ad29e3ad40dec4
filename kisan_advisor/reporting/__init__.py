"""
Terminal reporting for the KisanAI Advisor CLI.

Modules
-------
formatters : ASCII formatters for conditions, forecast, recommendations,
             score breakdown, and market prices.
"""
