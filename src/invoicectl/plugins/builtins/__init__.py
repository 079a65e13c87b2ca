"""Built-in plugins shipped with invoicectl."""
