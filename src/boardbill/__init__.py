"""boardbill - invoices derived from Trello board activity."""
