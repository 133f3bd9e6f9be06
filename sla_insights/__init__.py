"""
SLA Insights
============

Service-queue SLA risk analytics.

This package joins operational case state with AI-derived risk insights into
typed case records and provides the aggregation views and what-if simulation
used by the operations dashboards.
"""

__version__ = "0.1.0"
__author__ = "SLA Insights"
