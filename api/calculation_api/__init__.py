"""GraphQL service over the calculation engine."""
