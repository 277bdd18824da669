import pytest
from pydantic import ValidationError as SchemaValidationError

from foodiehub.core.exceptions import Forbidden, NotFound, ValidationError
from foodiehub.schemas import PaymentMethodCreate, PaymentMethodUpdate, PaymentType
from foodiehub.services.payment_methods import PaymentMethodService, mask_card_number
from foodiehub.services.store import Collection
from tests.conftest import find_payment_methods


@pytest.fixture
def service(store):
    return PaymentMethodService(store)


# =============================================================================
# MASKING
# =============================================================================

@pytest.mark.parametrize(
    "card_number, masked",
    [
        ("4111 1111 1111 1234", "**** **** **** 1234"),
        ("4111-1111-1111-9876", "****-****-****-9876"),
        ("4111111111115555", "************5555"),
        ("1234", "1234"),
        ("51234", "*1234"),
    ],
)
def test_mask_card_number(card_number, masked):
    assert mask_card_number(card_number) == masked


@pytest.mark.parametrize(
    "card_number",
    ["4111 1111 1111 1234", "378282246310005", "12345", "0000-0000-0000-0000"],
)
def test_mask_keeps_last_four_and_hides_every_other_digit(card_number):
    masked = mask_card_number(card_number)

    assert len(masked) == len(card_number)
    assert masked[-4:] == card_number[-4:]
    assert not any(c.isdigit() for c in masked[:-4])


def test_mask_is_a_fixed_point_on_masked_values():
    masked = mask_card_number("4111 1111 1111 1234")
    assert mask_card_number(masked) == masked


def test_mask_uses_given_character():
    assert mask_card_number("4111 1111 1111 1234", "X") == "XXXX XXXX XXXX 1234"


# =============================================================================
# SCHEMAS
# =============================================================================

def test_card_types_require_number_and_expiry():
    with pytest.raises(SchemaValidationError):
        PaymentMethodCreate(type=PaymentType.CREDIT_CARD, holder_name="Nick Fury")


def test_paypal_needs_no_card():
    method = PaymentMethodCreate(type=PaymentType.PAYPAL, holder_name="Nick Fury")
    assert method.card_number is None


@pytest.mark.parametrize("card_number", ["4111 abcd 1111 1234", "4111 1111 1111 12**", "123"])
def test_invalid_card_numbers_rejected(card_number):
    with pytest.raises(SchemaValidationError):
        PaymentMethodCreate(card_number=card_number, expiry_date="12/27", holder_name="N")


@pytest.mark.parametrize("expiry", ["13/27", "1/27", "12-27", "12/2027"])
def test_invalid_expiry_rejected(expiry):
    with pytest.raises(SchemaValidationError):
        PaymentMethodCreate(card_number="4111 1111 1111 1234", expiry_date=expiry, holder_name="N")


# =============================================================================
# SERVICE
# =============================================================================

async def test_list_is_scoped_to_admin_country(service, admin):
    methods = await service.list_methods(admin)

    assert len(methods) == 2
    assert {m.country for m in methods} == {"America"}


async def test_non_admin_cannot_list(service, manager_america, member_america):
    for user in (manager_america, member_america):
        with pytest.raises(Forbidden):
            await service.list_methods(user)


async def test_create_stores_masked_number(service, store, admin):
    created = await service.create(admin, PaymentMethodCreate(
        card_number="4000 0566 5566 5556",
        expiry_date="09/28",
        holder_name="Nick Fury",
    ))

    assert created.card_number == "**** **** **** 5556"
    assert created.country == "America"
    assert created.type is PaymentType.CREDIT_CARD

    stored = await store.get(Collection.PAYMENT_METHODS, created.id)
    assert "4000" not in stored["card_number"]


async def test_create_for_other_country_is_forbidden(service, store, admin):
    with pytest.raises(Forbidden):
        await service.create(admin, PaymentMethodCreate(
            type=PaymentType.PAYPAL,
            holder_name="Nick Fury",
            country="India",
        ))

    assert len(await find_payment_methods(store, "India")) == 1


async def test_update_keeps_masked_number_when_omitted(service, store, admin):
    method = (await find_payment_methods(store, "America"))[0]

    updated = await service.update(admin, method["id"], PaymentMethodUpdate(holder_name="SHIELD"))

    assert updated.holder_name == "SHIELD"
    assert updated.card_number == method["card_number"]
    assert updated.updated_at >= method["updated_at"]


async def test_update_masks_new_number(service, store, admin):
    method = (await find_payment_methods(store, "America"))[0]

    updated = await service.update(
        admin, method["id"], PaymentMethodUpdate(card_number="5555 4444 3333 1111")
    )

    assert updated.card_number == "**** **** **** 1111"


async def test_update_cannot_turn_paypal_into_card_without_number(service, admin):
    paypal = await service.create(admin, PaymentMethodCreate(type=PaymentType.PAYPAL, holder_name="Nick"))

    with pytest.raises(ValidationError):
        await service.update(admin, paypal.id, PaymentMethodUpdate(type=PaymentType.DEBIT_CARD))


async def test_update_other_country_is_forbidden(service, store, admin):
    india_method = (await find_payment_methods(store, "India"))[0]

    with pytest.raises(Forbidden):
        await service.update(admin, india_method["id"], PaymentMethodUpdate(holder_name="X"))

    stored = await store.get(Collection.PAYMENT_METHODS, india_method["id"])
    assert stored["holder_name"] == india_method["holder_name"]


async def test_delete(service, store, admin):
    method = (await find_payment_methods(store, "America"))[0]

    await service.delete(admin, method["id"])

    assert await store.get(Collection.PAYMENT_METHODS, method["id"]) is None
    with pytest.raises(NotFound):
        await service.get_method(admin, method["id"])


async def test_delete_unknown(service, admin):
    with pytest.raises(NotFound):
        await service.delete(admin, "missing")
