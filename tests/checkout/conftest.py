import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def checkout_bed():
    from checkout.domain import checkout

    bed = DomainFixture(checkout)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(checkout_bed):
    with checkout_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _adapters():
    """Swap the HTTP adapters for fakes so no test reaches the network."""
    from checkout.discounts import reset_validator, set_validator
    from checkout.discounts.fake_adapter import FakeDiscountValidator
    from checkout.orders import reset_submitter, set_submitter
    from checkout.orders.fake_adapter import FakeOrderSubmitter

    set_validator(FakeDiscountValidator())
    set_submitter(FakeOrderSubmitter())
    yield
    reset_validator()
    reset_submitter()
