"""View templates — fresh node trees for every view kind.

Each builder returns a new, unattached tree; components bind to it by
selector, so the class names here are the contract with the components.
"""

from __future__ import annotations

from shopfront.components.view import ViewNode as N
from shopfront.domain.types import PaymentMethod


def card_catalog() -> N:
    return N(
        "button",
        N("span", classes="card__category"),
        N("h2", classes="card__title"),
        N("img", classes="card__image"),
        N("span", classes="card__price"),
        classes="gallery__item card",
    )


def card_preview() -> N:
    return N(
        "div",
        N("img", classes="card__image"),
        N(
            "div",
            N("span", classes="card__category"),
            N("h2", classes="card__title"),
            N("p", classes="card__text"),
            N(
                "div",
                N("button", classes="button card__button"),
                N("span", classes="card__price"),
                classes="card__row",
            ),
            classes="card__column",
        ),
        classes="card card_full",
    )


def card_basket() -> N:
    return N(
        "li",
        N("span", classes="basket__item-index"),
        N("span", classes="card__title"),
        N("span", classes="card__price"),
        N("button", classes="basket__item-delete card__button", aria_label="delete"),
        classes="basket__item card card_compact",
    )


def basket() -> N:
    return N(
        "div",
        N("h2", classes="modal__title", text="Basket"),
        N("ul", classes="basket__list"),
        N(
            "div",
            N("button", classes="button basket__button", text="Checkout"),
            N("span", classes="basket__price"),
            classes="modal__actions",
        ),
        classes="basket",
    )


def order_form() -> N:
    return N(
        "form",
        N(
            "div",
            N("button", classes="button button_alt", name=PaymentMethod.CARD.value, text="Online"),
            N("button", classes="button button_alt", name=PaymentMethod.CASH.value, text="On delivery"),
            classes="order__buttons",
        ),
        N("input", classes="form__input", name="address", type="text"),
        N(
            "div",
            N("button", classes="button order__button", type="submit", text="Next"),
            N("span", classes="form__errors"),
            classes="modal__actions",
        ),
        classes="form",
        name="order",
    )


def contacts_form() -> N:
    return N(
        "form",
        N("input", classes="form__input", name="email", type="text"),
        N("input", classes="form__input", name="phone", type="text"),
        N(
            "div",
            N("button", classes="button", type="submit", text="Pay"),
            N("span", classes="form__errors"),
            classes="modal__actions",
        ),
        classes="form",
        name="contacts",
    )


def success() -> N:
    return N(
        "div",
        N("h2", classes="film__title order-success__title", text="Order placed"),
        N("p", classes="film__description order-success__description"),
        N("button", classes="button order-success__close", text="Back to shopping"),
        classes="order-success",
    )


def modal() -> N:
    return N(
        "div",
        N(
            "div",
            N("button", classes="modal__close", aria_label="close"),
            N("div", classes="modal__content"),
            classes="modal__container",
        ),
        classes="modal",
        id="modal-container",
    )


def page() -> N:
    return N(
        "body",
        N(
            "div",
            N(
                "header",
                N(
                    "button",
                    N("span", classes="header__basket-counter", text="0"),
                    classes="header__basket",
                ),
                classes="header",
            ),
            N("main", classes="gallery"),
            classes="page__wrapper",
        ),
        classes="page",
    )
