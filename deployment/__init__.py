"""
Deployment Framework
====================

Thin web3.py layer used by the deployment scripts:
- artifacts: compiled contract lookup by name
- deployer: contract deployment, instance lookup and transactions
- config: environment based settings
- runner: command line entry point
"""

__version__ = "1.0.0"
__author__ = "Real Estate Token Team"
