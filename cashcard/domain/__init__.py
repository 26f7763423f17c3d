"""Pure value types: cash cards, amounts and page requests."""
