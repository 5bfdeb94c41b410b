"""
RPC - JSON-RPC plumbing for talking to a consensus node.

Provides request/response envelopes and an httpx-based HTTP transport.
Decoding of method results lives in ``seicomet.tendermint``.
"""
