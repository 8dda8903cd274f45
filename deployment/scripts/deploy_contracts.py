"""Deploys RealEstateTokenFactory and creates the initial real estate token."""

INITIAL_TOKEN_SUPPLY = 1000


def migrate(deployer, artifacts):
    factory = artifacts.require('./RealEstateTokenFactory.sol')

    deployer.deploy(factory)
    instance = deployer.deployed(factory)
    return deployer.transact(instance, 'createRealEstateToken', INITIAL_TOKEN_SUPPLY)
