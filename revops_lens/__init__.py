"""
RevOps Lens

List filtering, ownership scoping and account hierarchy grouping for a
revenue-operations dashboard over Salesforce-shaped CRM records.
"""

__version__ = "0.1.0"
