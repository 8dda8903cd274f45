"""
Deployment Scripts
==================

Scripts run by deployment.runner against the configured network.

- deploy_contracts: deploys RealEstateTokenFactory and creates the initial token
"""
