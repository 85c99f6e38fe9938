"""Client module - Storage API, local photo store, sync engine and CLI."""
