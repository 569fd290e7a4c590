"""Tests for coupon evaluation, redemption and administration."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from conftest import make_coupon
from storefront.errors import (
    CouponExpired,
    CouponInactive,
    CouponMinimumNotMet,
    CouponNotFound,
    CouponUsageLimitExceeded,
    DuplicateValue,
    InvalidCouponDefinition,
)
from storefront.models.coupon import Coupon
from storefront.schemas.coupon_schemas import CouponCreate, CouponUpdate
from storefront.services import coupon_service
from storefront.services.coupon_service import evaluate_coupon


class TestEvaluateCoupon:
    def test_missing_coupon(self):
        check = evaluate_coupon(None, "NOPE", Decimal("10.00"))
        assert not check.valid
        assert check.discount == Decimal("0")
        assert isinstance(check.error, CouponNotFound)

    def test_inactive_coupon(self):
        coupon = Coupon(code="OFF", discount_amount=Decimal("5.00"), is_active=False)
        check = evaluate_coupon(coupon, "OFF", Decimal("10.00"))
        assert not check.valid
        assert isinstance(check.error, CouponInactive)

    def test_expired_coupon(self):
        coupon = Coupon(
            code="OLD",
            discount_amount=Decimal("5.00"),
            expires_at=datetime.utcnow() - timedelta(days=1),
        )
        check = evaluate_coupon(coupon, "OLD", Decimal("10.00"))
        assert not check.valid
        assert check.discount == Decimal("0")
        assert isinstance(check.error, CouponExpired)

    def test_future_expiry_is_fine(self):
        coupon = Coupon(
            code="SOON",
            discount_amount=Decimal("5.00"),
            expires_at=datetime.utcnow() + timedelta(days=1),
        )
        assert evaluate_coupon(coupon, "SOON", Decimal("10.00")).valid

    def test_usage_cap_reached(self):
        coupon = Coupon(code="CAP", discount_amount=Decimal("5.00"), max_uses=2, current_uses=2)
        check = evaluate_coupon(coupon, "CAP", Decimal("10.00"))
        assert not check.valid
        assert isinstance(check.error, CouponUsageLimitExceeded)

    def test_minimum_not_met(self):
        coupon = Coupon(
            code="SAVE10",
            discount_percentage=Decimal("10"),
            min_order_amount=Decimal("50.00"),
        )
        check = evaluate_coupon(coupon, "SAVE10", Decimal("49.99"))
        assert not check.valid
        assert isinstance(check.error, CouponMinimumNotMet)

    def test_minimum_is_inclusive(self):
        coupon = Coupon(
            code="SAVE10",
            discount_percentage=Decimal("10"),
            min_order_amount=Decimal("50.00"),
        )
        check = evaluate_coupon(coupon, "SAVE10", Decimal("50.00"))
        assert check.valid
        assert check.discount == Decimal("5.00")

    def test_inactive_reported_before_expiry(self):
        coupon = Coupon(
            code="BOTH",
            discount_amount=Decimal("5.00"),
            is_active=False,
            expires_at=datetime.utcnow() - timedelta(days=1),
        )
        assert isinstance(evaluate_coupon(coupon, "BOTH", Decimal("10.00")).error, CouponInactive)

    def test_percentage_rounds_half_up_to_cents(self):
        coupon = Coupon(code="PCT", discount_percentage=Decimal("10"))
        assert evaluate_coupon(coupon, "PCT", Decimal("59.98")).discount == Decimal("6.00")
        assert evaluate_coupon(coupon, "PCT", Decimal("0.05")).discount == Decimal("0.01")

    def test_fixed_discount_is_capped_at_order_amount(self):
        coupon = Coupon(code="HIGH50", discount_amount=Decimal("50.00"))
        check = evaluate_coupon(coupon, "HIGH50", Decimal("30.00"))
        assert check.valid
        assert check.discount == Decimal("30.00")

    def test_full_percentage_discount(self):
        coupon = Coupon(code="FREE", discount_percentage=Decimal("100"))
        assert evaluate_coupon(coupon, "FREE", Decimal("12.34")).discount == Decimal("12.34")

    def test_discount_never_exceeds_amount(self):
        coupon = Coupon(code="PCT", discount_percentage=Decimal("33.33"))
        for amount in ("0.00", "0.01", "1.00", "99.99", "1234.56"):
            check = evaluate_coupon(coupon, "PCT", Decimal(amount))
            assert Decimal("0") <= check.discount <= Decimal(amount)


    def test_sub_cent_amount_below_minimum_is_rejected(self):
        coupon = Coupon(code="MIN", discount_amount=Decimal("50.00"), min_order_amount=Decimal("10.01"))
        check = evaluate_coupon(coupon, "MIN", Decimal("10.005"))
        assert not check.valid
        assert isinstance(check.error, CouponMinimumNotMet)

    def test_cap_uses_the_exact_amount(self):
        coupon = Coupon(code="HIGH50", discount_amount=Decimal("50.00"))
        check = evaluate_coupon(coupon, "HIGH50", Decimal("10.005"))
        assert check.discount <= Decimal("10.005")


class TestValidateCoupon:
    def test_valid_coupon_returns_row(self, session, save10):
        result = coupon_service.validate_coupon(session, "SAVE10", Decimal("59.98"))
        assert result.valid
        assert result.discount == Decimal("6.00")
        assert result.coupon.code == "SAVE10"

    def test_invalid_coupon_returns_zero(self, session, save10):
        result = coupon_service.validate_coupon(session, "SAVE10", Decimal("10.00"))
        assert not result.valid
        assert result.discount == Decimal("0")
        assert result.coupon is None

    def test_unknown_code(self, session):
        result = coupon_service.validate_coupon(session, "MISSING", Decimal("10.00"))
        assert not result.valid


class TestRedeemCoupon:
    def test_capped_coupon_redeems_exactly_max_uses(self, session):
        coupon = make_coupon(session, "TWICE", discount_amount=Decimal("1.00"), max_uses=2)

        coupon_service.redeem_coupon(session, coupon)
        session.commit()
        coupon_service.redeem_coupon(session, coupon)
        session.commit()

        with pytest.raises(CouponUsageLimitExceeded):
            coupon_service.redeem_coupon(session, coupon)

        session.rollback()
        session.refresh(coupon)
        assert coupon.current_uses == 2

    def test_uncapped_coupon_keeps_counting(self, session):
        coupon = make_coupon(session, "MANY", discount_amount=Decimal("1.00"))

        for _ in range(5):
            coupon_service.redeem_coupon(session, coupon)
            session.commit()

        session.refresh(coupon)
        assert coupon.current_uses == 5


class TestCouponAdmin:
    def test_create_requires_a_discount_mode(self, session):
        with pytest.raises(InvalidCouponDefinition):
            coupon_service.create_coupon(session, CouponCreate(code="EMPTY"))

    def test_create_rejects_both_modes(self, session):
        data = CouponCreate(
            code="BOTH",
            discount_percentage=Decimal("10"),
            discount_amount=Decimal("5.00"),
        )
        with pytest.raises(InvalidCouponDefinition):
            coupon_service.create_coupon(session, data)

    def test_create_rejects_duplicate_code(self, session, save10):
        with pytest.raises(DuplicateValue):
            coupon_service.create_coupon(
                session, CouponCreate(code="SAVE10", discount_amount=Decimal("1.00"))
            )

    def test_create_normalizes_aware_expiry(self, session):
        coupon = coupon_service.create_coupon(
            session,
            CouponCreate(
                code="TZ",
                discount_amount=Decimal("1.00"),
                expires_at="2030-01-01T12:00:00+02:00",
            ),
        )
        assert coupon.expires_at == datetime(2030, 1, 1, 10, 0, 0)

    def test_update_keeps_omitted_fields(self, session, save10):
        updated = coupon_service.update_coupon(session, save10.id, CouponUpdate(max_uses=5))
        assert updated.max_uses == 5
        assert updated.min_order_amount == Decimal("50.00")
        assert updated.discount_percentage == Decimal("10")

    def test_update_explicit_null_clears_field(self, session, save10):
        updated = coupon_service.update_coupon(
            session, save10.id, CouponUpdate.model_validate({"min_order_amount": None})
        )
        assert updated.min_order_amount is None

    def test_update_can_switch_discount_mode(self, session, save10):
        updated = coupon_service.update_coupon(
            session,
            save10.id,
            CouponUpdate.model_validate({"discount_percentage": None, "discount_amount": "7.50"}),
        )
        assert updated.discount_percentage is None
        assert updated.discount_amount == Decimal("7.50")

    def test_update_rejects_merged_row_with_both_modes(self, session, save10):
        with pytest.raises(InvalidCouponDefinition):
            coupon_service.update_coupon(
                session, save10.id, CouponUpdate(discount_amount=Decimal("5.00"))
            )

        session.refresh(save10)
        assert save10.discount_amount is None

    def test_update_cannot_drop_cap_below_uses(self, session):
        coupon = make_coupon(session, "BUSY", discount_amount=Decimal("2.00"), max_uses=5)
        coupon.current_uses = 4
        session.add(coupon)
        session.commit()

        with pytest.raises(InvalidCouponDefinition):
            coupon_service.update_coupon(session, coupon.id, CouponUpdate(max_uses=1))

        session.refresh(coupon)
        assert coupon.max_uses == 5
        assert coupon.current_uses == 4

    def test_update_cap_down_to_current_uses(self, session):
        coupon = make_coupon(session, "BUSY", discount_amount=Decimal("2.00"), max_uses=5)
        coupon.current_uses = 4
        session.add(coupon)
        session.commit()

        updated = coupon_service.update_coupon(session, coupon.id, CouponUpdate(max_uses=4))
        assert updated.max_uses == 4

    def test_update_unknown_coupon(self, session):
        with pytest.raises(CouponNotFound):
            coupon_service.update_coupon(session, 999, CouponUpdate(max_uses=1))

    def test_delete_is_soft(self, session, save10):
        assert coupon_service.delete_coupon(session, save10.id)
        session.refresh(save10)
        assert save10.is_active is False
        assert not coupon_service.validate_coupon(session, "SAVE10", Decimal("100.00")).valid

    def test_delete_unknown_coupon(self, session):
        assert coupon_service.delete_coupon(session, 999) is False

    def test_require_coupon(self, session, save10):
        assert coupon_service.require_coupon(session, "SAVE10").id == save10.id
        with pytest.raises(CouponNotFound):
            coupon_service.require_coupon(session, "NOPE")
