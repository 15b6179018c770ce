"""Parsing helpers for asserting on rendered fragments."""

import re

import lxml.html

RULE_PATTERN = re.compile(r"([^{}]+)\{([^{}]*)\}")


def parse_fragment(markup: str):
    """Parse a fragment under a synthetic root element."""
    return lxml.html.fragment_fromstring(markup, create_parent="root")


def find_all(root, xpath: str) -> list:
    return root.xpath(xpath)


def by_class(root, class_name: str) -> list:
    """All elements carrying class_name among their classes."""
    return root.xpath(
        f"//*[contains(concat(' ', normalize-space(@class), ' '), ' {class_name} ')]"
    )


def parse_declarations(text: str) -> dict[str, str]:
    """Parse ``prop: value; ...`` into a dict."""
    declarations = {}
    for item in text.split(";"):
        prop, sep, value = item.partition(":")
        if sep and prop.strip():
            declarations[prop.strip()] = value.strip()
    return declarations


def style_of(element) -> dict[str, str]:
    return parse_declarations(element.get("style", ""))


def stylesheet_of(root) -> dict[str, dict[str, str]]:
    """Selector -> declarations for the first <style> element."""
    styles = root.xpath("//style")
    css = (styles[0].text or "") if styles else ""
    return {
        selector.strip(): parse_declarations(body)
        for selector, body in RULE_PATTERN.findall(css)
    }


def path_letters(d: str) -> list[str]:
    """Command letters of an SVG path, in order."""
    return re.findall(r"[MLQAZ]", d)


def slide_ids(root) -> list[str]:
    return [slide.get("data-slide-id") for slide in by_class(root, "slide")]


def shape_ids(slide) -> list[str]:
    return [
        shape.get("data-shape-id")
        for shape in slide.xpath("./*[@data-shape-id]")
    ]
