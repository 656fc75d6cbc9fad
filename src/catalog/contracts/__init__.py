"""
Contracts (data models).

This folder defines the shapes exchanged between presentation code and the
catalog client, e.g.:
- catalog entities (services, products, workshops)
- the ``{ok, data, msg}`` repository envelope
- auth request/response payloads
- the transport, storage and repository interfaces

Both the fixture-backed and the HTTP-backed repositories return these shapes,
so switching the mock flag changes the data source and nothing else.
"""
