"""
Commands - click subcommand groups for the ``bepro`` CLI.

- network: read network state, stake, open/close issues, vote on merges
- token:   inspect the BEPRO token and manage the network allowance
"""
