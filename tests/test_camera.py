from flight.camera import FieldViewport


def test_field_size_scales_viewport():
    vp = FieldViewport(scale=2.0)
    vp.set_viewport_size(400, 300)
    assert vp.field_size == (800.0, 600.0)


def test_field_screen_mapping():
    vp = FieldViewport(scale=2.0)
    assert vp.field_to_screen((800.0, 601.0)) == (400, 300)
    assert vp.rect_to_screen(100.0, 50.0, 100.0, 30.0) == (50, 25, 50, 15)


def test_lengths_never_vanish():
    vp = FieldViewport(scale=2.0)
    assert vp.length_to_screen(0.5) == 1
    assert vp.length_to_screen(9.0) == 4


def test_scale_is_clamped():
    assert FieldViewport(scale=0.0).scale == 0.1
    assert FieldViewport(scale=100).scale == 10.0
