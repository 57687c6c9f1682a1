import pytest

from printbill.pdf.layout import LOGO_MAX_H, LOGO_MAX_W, fit_within


class TestFitWithin:
    def test_wide_image_limited_by_width(self):
        assert fit_within(200, 100, LOGO_MAX_W, LOGO_MAX_H) == pytest.approx((50, 25))

    def test_tall_image_limited_by_height(self):
        assert fit_within(100, 300, LOGO_MAX_W, LOGO_MAX_H) == pytest.approx((10, 30))

    def test_small_image_is_enlarged(self):
        assert fit_within(5, 3, 50, 30) == pytest.approx((50, 30))

    def test_keeps_aspect_ratio(self):
        w, h = fit_within(640, 480, 50, 30)
        assert w / h == pytest.approx(640 / 480)
        assert w <= 50 and h <= 30

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
    def test_rejects_non_positive(self, size):
        with pytest.raises(ValueError):
            fit_within(*size, 50, 30)
