"""Storage backends for condoledger."""
