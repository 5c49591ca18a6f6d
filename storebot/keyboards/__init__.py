from .inline import (
    admin_back,
    admin_panel,
    admin_price_families,
    admin_price_items,
    back,
    cancel_order_markup,
    family_group_menu,
    family_items,
    insufficient_funds_markup,
    main_menu,
    order_review_markup,
    subscription_markup,
    topup_cards,
    topup_paid,
    topup_review_markup,
    user_actions,
)
