"""
Tendermint - Typed access to the consensus node RPC.

Request encoders, response decoders and a client for Tendermint 0.37 and
CometBFT 0.38 nodes. Only the methods this package needs are covered:
block, block_results, validators and status.
"""
