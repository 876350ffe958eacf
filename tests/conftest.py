import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay and tool credentials before the domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("TOOL_SECRET", "test-tool-secret")
    os.environ.setdefault("SERVICE_ROLE_KEY", "test-service-role-key")
    os.environ.setdefault("LOG_DIR", "")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session", autouse=True)
def setup_db(storefront_bed):
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)

    yield

    drop_db(storefront)


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Reset stores and swapped adapters after every test."""
    yield

    from protean import current_domain

    from storefront.inventory.provider import reset_inventory_provider
    from storefront.ordering.payment_links import reset_link_provider

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()

    reset_link_provider()
    reset_inventory_provider()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
WORKSPACE_ID = "ws-001"


@pytest.fixture()
def workspace_id():
    return WORKSPACE_ID


@pytest.fixture()
def make_product(_ctx):
    """Persist a product in the test workspace and return it."""
    from protean import current_domain

    from storefront.catalogue.product import Product

    def _make(title="Linen Shirt", price=10.0, stock=5, workspace_id=WORKSPACE_ID, **fields):
        product = Product.create(workspace_id=workspace_id, title=title, price=price, stock=stock, **fields)
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def start_conversation(_ctx):
    """Open a conversation through the StartConversation command; returns its id."""
    from protean import current_domain

    from storefront.cart.management import StartConversation

    def _start(workspace_id=WORKSPACE_ID, customer_phone="+15550100", customer_name="Ada"):
        return current_domain.process(
            StartConversation(
                workspace_id=workspace_id,
                customer_phone=customer_phone,
                customer_name=customer_name,
            ),
            asynchronous=False,
        )

    return _start
