from responsive_bg.stylesheet import render_stylesheet


def test_without_orientation():
    css = render_stylesheet("city", "/img/city", "city", "jpg", None, [1440, 768])
    assert css.splitlines() == [
        ".city { background-image: url(/img/city/city.jpg); }",
        "@media (max-width: 1440px) { .city { background-image: url(/img/city/city-1440.jpg); } }",
        "@media (max-width: 768px) { .city { background-image: url(/img/city/city-768.jpg); } }",
    ]


def test_with_orientation():
    css = render_stylesheet("hero", "/static", "city", "png", "portrait", [768])
    assert css.splitlines() == [
        "@media (orientation: portrait) { .hero { background-image: url(/static/city.png); } }",
        "@media (orientation: portrait) and (max-width: 768px) { .hero { background-image: url(/static/city-768.png); } }",
    ]


def test_breakpoint_order_is_not_sorted():
    css = render_stylesheet("c", "", "b", "jpg", None, [768, 2048, 1024])
    widths = [line.split("max-width: ")[1].split("px")[0] for line in css.splitlines()[1:]]
    assert widths == ["768", "2048", "1024"]


def test_no_breakpoints_only_base_rule():
    css = render_stylesheet("city", "", "city", "jpg", None, [])
    assert css == ".city { background-image: url(/city.jpg); }\n"
