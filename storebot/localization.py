"""User-facing texts.

Uzbek is the default language; English is used for users whose Telegram
client reports ``en``. Texts are HTML formatted.
"""

from storebot.misc import TgConfig

TRANSLATIONS = {
    'uz': {
        # menus
        'main_menu': '👋 Assalomu alaykum, <b>{name}</b>!\n\n💰 Balansingiz: <b>{balance} so\'m</b>\n\nKerakli bo\'limni tanlang:',
        'btn_account': '💰 Hisobim',
        'btn_freefire': '🎮 Free Fire',
        'btn_pubg': '🎮 PUBG UC/PP',
        'btn_telegram': '👑 Premium & Stars',
        'btn_garden': '🌱 Grow a Garden',
        'btn_robux': '🟥 Robux',
        'btn_topup': '💳 Hisobni to\'ldirish',
        'btn_promo': '🎁 Promokod',
        'btn_help': '❓ Yordam',
        'btn_admin_panel': '👑 Admin Panel',
        'btn_back': '🔙 Orqaga',
        'btn_main_menu': '🔙 Asosiy menyu',
        'btn_confirm': '✅ Tasdiqlash',
        'btn_reject': '❌ Rad etish',
        'btn_cancel_order': '❌ Buyurtmani bekor qilish',
        'btn_paid': '✅ To\'lov qildim',
        'btn_check_subscription': '✅ Tekshirish',
        'menu_pubg': '🎮 <b>PUBG Mobile</b>\n\nKerakli bo\'limni tanlang:',
        'menu_telegram': '👑 <b>Telegram Premium & Stars</b>\n\nKerakli bo\'limni tanlang:',
        'menu_garden_menu': '🌱 <b>Grow a Garden</b>\n\nKerakli bo\'limni tanlang:',
        'choose_item': '<b>{title}</b>\n\nKerakli miqdorni tanlang:',
        'help_text': '❓ <b>Yordam</b>\n\nSavollar va muammolar bo\'yicha adminga yozing: @{support}\n\n'
                     '/start - asosiy menyu\n/cancel - joriy amalni bekor qilish\n/promo KOD - promokodni ishlatish',
        'use_menu': 'Iltimos, quyidagi menyudan foydalaning:',
        'flow_cancelled': '❌ Amal bekor qilindi.',
        'nothing_to_cancel': 'Bekor qilinadigan amal yo\'q.',
        'rate_limited': '⏳ Juda ko\'p so\'rov. Biroz kuting.',
        'subscription_required': '📢 Botdan foydalanish uchun avval kanallarga obuna bo\'ling: {channels}',
        'subscription_still_missing': '❌ Siz hali obuna bo\'lmagansiz: {channels}',
        'subscription_ok': '✅ Rahmat! Obuna tasdiqlandi.',

        # account
        'account_info': '💰 <b>Hisobim</b>\n\n🆔 ID: <code>{user_id}</code>\n💵 Balans: <b>{balance} so\'m</b>\n'
                        '📅 Ro\'yxatdan o\'tgan: {join_date}\n\n📦 So\'nggi buyurtmalar:\n{orders}',
        'order_line': '• <code>{order_id}</code> {item} - {price} so\'m ({status})',
        'no_orders': 'Buyurtmalar yo\'q',
        'status_pending': '⏳ kutilmoqda',
        'status_completed': '✅ bajarildi',
        'status_rejected': '❌ rad etildi',
        'status_cancelled': '🚫 bekor qilindi',

        # purchase
        'item_selected': '📦 <b>{item}</b>\n💰 Narxi: <b>{price} so\'m</b>\n\n{prompt}',
        'ask_uid': '🎮 O\'yin ID raqamingizni yuboring (kamida 5 ta raqam):',
        'ask_username': '👤 Telegram username yuboring (masalan, @username):',
        'ask_nickname': '👤 O\'yindagi nikingizni yuboring:',
        'invalid_uid': '❌ Iltimos, to\'g\'ri ID raqamini kiriting! Faqat raqamlar, 5 dan 20 tagacha.',
        'invalid_username': '❌ Username noto\'g\'ri. Faqat lotin harflari, raqamlar va _ (3 dan 32 tagacha belgi).',
        'invalid_nickname': '❌ Nik 2 dan 64 tagacha belgidan iborat bo\'lishi kerak.',
        'insufficient_funds': '❌ Balansingizda mablag\' yetarli emas.\n\n💵 Balans: {balance} so\'m\n'
                              '💰 Narxi: {price} so\'m\n➖ Yetishmaydi: <b>{shortfall} so\'m</b>',
        'order_created': '✅ Buyurtmangiz qabul qilindi!\n\n🆔 Buyurtma: <code>{order_id}</code>\n📦 {item}\n'
                         '🎮 ID: <code>{delivery_id}</code>\n💰 Summa: {price} so\'m\n\nTez orada admin tasdiqlaydi.',
        'order_cancelled_self': '🚫 Buyurtma <code>{order_id}</code> bekor qilindi.{refund}',
        'order_confirmed_user': '✅ Buyurtmangiz bajarildi!\n\n🆔 <code>{order_id}</code>\n📦 {item}\n'
                                '🎮 ID: <code>{delivery_id}</code>\n💰 {price} so\'m\n💵 Balans: {balance} so\'m',
        'order_rejected_user': '❌ Buyurtmangiz rad etildi.\n\n🆔 <code>{order_id}</code>\n📦 {item}\n'
                               '📝 Sabab: {reason}{refund}',
        'order_cancelled_user': '🚫 Buyurtmangiz bekor qilindi.\n\n🆔 <code>{order_id}</code>\n📦 {item}\n'
                                '📝 Sabab: {reason}{refund}',
        'refund_line': '\n💵 {price} so\'m balansingizga qaytarildi.',
        'default_reject_reason': 'admin tomonidan rad etildi',

        # top-up
        'ask_topup_amount': '💳 <b>Hisobni to\'ldirish</b>\n\nQancha summa kiritmoqchisiz? '
                            '(minimal {min}, maksimal {max} so\'m)',
        'invalid_amount': '❌ Iltimos, faqat raqam kiriting.',
        'topup_amount_out_of_range': '❌ Summa {min} va {max} so\'m orasida bo\'lishi kerak.',
        'topup_choose_card_for': '💳 {amount} so\'m. To\'lov uchun kartani tanlang:',
        'topup_choose_card': 'Iltimos, tugmalar orqali kartani tanlang.',
        'topup_send_receipt': 'To\'lovni amalga oshirib "✅ To\'lov qildim" tugmasini bosing yoki chek rasmini yuboring.',
        'topup_payment_details': '💳 <b>{card}</b>\n\nKarta: <code>{number}</code>\nEgasi: {owner}\n'
                                 'Summa: <b>{amount} so\'m</b>\n\nTo\'lovdan so\'ng "✅ To\'lov qildim" tugmasini bosing '
                                 'yoki chek rasmini yuboring.',
        'topup_submitted': '✅ So\'rovingiz qabul qilindi!\n\n🆔 <code>{request_id}</code>\n💵 {amount} so\'m\n\n'
                           'Admin to\'lovni tekshirgach balansingiz to\'ldiriladi.',
        'topup_unavailable': 'Hisobni to\'ldirish hozircha mavjud emas. Adminga murojaat qiling.',
        'topup_confirmed_user': '✅ Hisobingiz {amount} so\'mga to\'ldirildi!\n💵 Balans: {balance} so\'m',
        'topup_rejected_user': '❌ {amount} so\'mlik to\'lovingiz tasdiqlanmadi. Savollar bo\'lsa adminga yozing.',
        'unknown_card': '❌ Bunday karta mavjud emas.',

        # promo
        'ask_promo_code': '🎁 Promokodni yuboring:',
        'promo_redeemed': '🎉 Promokod qabul qilindi! +{amount} so\'m\n💵 Balans: {balance} so\'m',
        'promo_not_found': '❌ Bunday promokod topilmadi.',
        'promo_already_used': '❌ Siz bu promokoddan allaqachon foydalangansiz.',
        'promo_exhausted': '❌ Promokodning muddati tugagan yoki limiti tugagan.',

        # errors
        'error_generic': '❌ Xatolik yuz berdi. Iltimos, qaytadan urinib ko\'ring.',
        'error_validation': '❌ Noto\'g\'ri qiymat.',
        'error_not_found': '❌ Topilmadi.',
        'unknown_item': '❌ Noto\'g\'ri tanlov!',
        'order_not_found': '❌ Buyurtma topilmadi!',
        'user_not_found': '❌ Foydalanuvchi topilmadi.',
        'permission_denied': '❌ Sizda bunday huquq yo\'q!',
        'already_resolved': 'Bu buyurtma allaqachon ko\'rib chiqilgan: {status}',
        'no_active_flow': 'Amal eskirgan. Iltimos, menyudan qaytadan boshlang.',
        'unknown_action': '❌ Noma\'lum amal.',
        'invalid_price': '❌ Narx musbat son bo\'lishi kerak.',
        'insufficient_funds_at_confirmation': '⚠️ Foydalanuvchida yetarli mablag\' yo\'q.\n'
                                              'Balans: {balance} so\'m, kerak: {price} so\'m, '
                                              'yetishmaydi: {shortfall} so\'m. Buyurtma kutishda qoldi.',

        # admin
        'admin_panel': '👑 <b>Admin Panel</b>\n\n👥 Jami foydalanuvchilar: {users}\n📊 Bot ish holati: ✅ Ishlamoqda\n\n'
                       'Kerakli bo\'limni tanlang:',
        'btn_admin_stats': '📊 Statistika',
        'btn_admin_pending': '⏳ Kutilayotgan buyurtmalar',
        'btn_admin_broadcast': '📢 Xabar yuborish',
        'btn_admin_find_user': '👥 Foydalanuvchini topish',
        'btn_admin_prices': '💲 Narxlarni o\'zgartirish',
        'btn_admin_promo_create': '🎁 Promokod yaratish',
        'btn_admin_promo_list': '📋 Promokodlar',
        'btn_admin_promo_clear': '🗑 Promokodlarni tozalash',
        'btn_user_message': '✉️ Xabar yozish',
        'btn_user_add_balance': '➕ Balans qo\'shish',
        'btn_user_sub_balance': '➖ Balans ayirish',
        'admin_stats': '📊 <b>Bot statistikasi</b>\n\n👥 Jami foydalanuvchilar: {users}\n'
                       '💰 Eng ko\'p balansli foydalanuvchilar:\n{top}\n\n'
                       '📦 Buyurtmalar: ⏳ {pending} | ✅ {completed} | ❌ {rejected} | 🚫 {cancelled}\n'
                       '💵 Tushum: {revenue} so\'m\n💳 To\'ldirilgan: {topped_up} so\'m\n'
                       '⏳ Kutilayotgan to\'lovlar: {pending_topups}',
        'admin_top_user': '{place}. ID:{user_id} {name} - {balance} so\'m',
        'no_data': 'Ma\'lumot yo\'q',
        'admin_new_order': '🛒 <b>Yangi buyurtma</b> <code>{order_id}</code>\n\n👤 {user} (<code>{user_id}</code>)\n'
                           '🏷 {family}\n📦 {item}\n🎮 ID: <code>{delivery_id}</code>\n💰 Narxi: {price} so\'m\n'
                           '💵 Balans: {balance} so\'m\n🕐 {timing}',
        'admin_new_topup': '💳 <b>Yangi to\'lov</b> <code>{request_id}</code>\n\n👤 {user} (<code>{user_id}</code>)\n'
                           '💵 Summa: {amount} so\'m\n💳 Karta: {card}\n💰 Joriy balans: {balance} so\'m',
        'admin_order_cancelled': '🚫 Buyurtma <code>{order_id}</code> foydalanuvchi <code>{user_id}</code> '
                                 'tomonidan bekor qilindi.',
        'timing_at_create': 'Mablag\' buyurtmada yechilgan',
        'timing_at_confirm': 'Mablag\' tasdiqlanganda yechiladi',
        'review_confirmed': '✅ Tasdiqlandi ({admin})',
        'review_rejected': '❌ Rad etildi ({admin})',
        'review_closed': 'Holat: {status}',
        'no_pending': '✅ Kutilayotgan buyurtmalar yo\'q.',
        'pending_summary': '⏳ Kutilmoqda: {orders} ta buyurtma, {topups} ta to\'lov.',
        'pending_order': '🛒 <code>{order_id}</code>\n👤 <code>{user_id}</code>\n📦 {item}\n'
                         '🎮 ID: <code>{delivery_id}</code>\n💰 {price} so\'m\n🕐 {created_at}',
        'pending_topup': '💳 <code>{request_id}</code>\n👤 <code>{user_id}</code>\n💵 {amount} so\'m ({card})\n'
                         '🕐 {created_at}',
        'ask_broadcast': '📢 <b>Xabar yuborish</b>\n\nBarcha foydalanuvchilarga yubormoqchi bo\'lgan xabaringizni yuboring:',
        'broadcast_started': '📤 Xabar {count} ta foydalanuvchiga yuborilmoqda...',
        'broadcast_done': '✅ Yuborildi: {delivered}\n❌ Yuborilmadi: {failed}',
        'ask_find_user': '🔎 Foydalanuvchi ID raqami yoki @username ni yuboring:',
        'admin_user_card': '👤 <b>{name}</b>\n🆔 <code>{user_id}</code>\n💵 Balans: {balance} so\'m\n'
                           '📅 Ro\'yxatdan o\'tgan: {join_date}\n👁 Oxirgi faollik: {last_seen}',
        'ask_user_message': '✉️ <code>{user_id}</code> ga yuboriladigan xabarni yozing:',
        'admin_message_to_user': '📩 <b>Admin xabari:</b>\n\n{text}',
        'user_message_sent': '✅ Xabar yuborildi.',
        'user_message_failed': '❌ Xabarni yetkazib bo\'lmadi.',
        'ask_balance_add': '➕ <code>{user_id}</code> balansiga qancha qo\'shilsin?',
        'ask_balance_sub': '➖ <code>{user_id}</code> balansidan qancha ayirilsin?',
        'balance_updated': '✅ <code>{user_id}</code> balansi: {balance} so\'m',
        'admin_choose_family': '💲 Mahsulot turini tanlang:',
        'admin_choose_item': '💲 <b>{title}</b>\n\nNarxini o\'zgartirmoqchi bo\'lgan mahsulotni tanlang:',
        'ask_new_price': '💲 {item}\nJoriy narx: {price} so\'m\n\nYangi narxni yuboring:',
        'price_updated': '✅ {item} narxi: {price} so\'m',
        'ask_promo_amount': '🎁 Promokod summasini kiriting (so\'m):',
        'ask_promo_uses': '🔢 Promokoddan necha kishi foydalana oladi?',
        'ask_promo_days': '📅 Promokod necha kun amal qiladi? (0 - muddatsiz)',
        'promo_invalid_uses': '❌ Foydalanishlar soni 1 dan {max} gacha bo\'lishi kerak.',
        'promo_invalid_days': '❌ Kunlar soni 0 dan {max} gacha bo\'lishi kerak.',
        'promo_created': '✅ Promokod yaratildi!\n\n🎁 <code>{code}</code>\n💵 {amount} so\'m\n🔢 {uses} marta\n'
                         '📅 Tugaydi: {expires}',
        'promo_line': '🎁 <code>{code}</code> - {amount} so\'m, {uses_left}/{total}, {expires}',
        'no_promos': 'Faol promokodlar yo\'q.',
        'promos_cleared': '🗑 {count} ta promokod o\'chirildi.',
        'never': 'muddatsiz',
    },
    'en': {
        'main_menu': '👋 Hello, <b>{name}</b>!\n\n💰 Your balance: <b>{balance} so\'m</b>\n\nChoose a section:',
        'btn_account': '💰 My account',
        'btn_freefire': '🎮 Free Fire',
        'btn_pubg': '🎮 PUBG UC/PP',
        'btn_telegram': '👑 Premium & Stars',
        'btn_garden': '🌱 Grow a Garden',
        'btn_robux': '🟥 Robux',
        'btn_topup': '💳 Top up balance',
        'btn_promo': '🎁 Promo code',
        'btn_help': '❓ Help',
        'btn_admin_panel': '👑 Admin panel',
        'btn_back': '🔙 Back',
        'btn_main_menu': '🔙 Main menu',
        'btn_confirm': '✅ Confirm',
        'btn_reject': '❌ Reject',
        'btn_cancel_order': '❌ Cancel order',
        'btn_paid': '✅ I paid',
        'btn_check_subscription': '✅ Check',
        'menu_pubg': '🎮 <b>PUBG Mobile</b>\n\nChoose a section:',
        'menu_telegram': '👑 <b>Telegram Premium & Stars</b>\n\nChoose a section:',
        'menu_garden_menu': '🌱 <b>Grow a Garden</b>\n\nChoose a section:',
        'choose_item': '<b>{title}</b>\n\nChoose an amount:',
        'help_text': '❓ <b>Help</b>\n\nFor questions and problems write to the admin: @{support}\n\n'
                     '/start - main menu\n/cancel - cancel the current action\n/promo CODE - redeem a promo code',
        'use_menu': 'Please use the menu below:',
        'flow_cancelled': '❌ Action cancelled.',
        'nothing_to_cancel': 'Nothing to cancel.',
        'rate_limited': '⏳ Too many requests. Please wait a moment.',
        'subscription_required': '📢 Please subscribe to our channels first: {channels}',
        'subscription_still_missing': '❌ You are not subscribed yet: {channels}',
        'subscription_ok': '✅ Thanks! Subscription confirmed.',

        'account_info': '💰 <b>My account</b>\n\n🆔 ID: <code>{user_id}</code>\n💵 Balance: <b>{balance} so\'m</b>\n'
                        '📅 Joined: {join_date}\n\n📦 Recent orders:\n{orders}',
        'order_line': '• <code>{order_id}</code> {item} - {price} so\'m ({status})',
        'no_orders': 'No orders yet',
        'status_pending': '⏳ pending',
        'status_completed': '✅ completed',
        'status_rejected': '❌ rejected',
        'status_cancelled': '🚫 cancelled',

        'item_selected': '📦 <b>{item}</b>\n💰 Price: <b>{price} so\'m</b>\n\n{prompt}',
        'ask_uid': '🎮 Send your game ID (at least 5 digits):',
        'ask_username': '👤 Send the Telegram username (e.g. @username):',
        'ask_nickname': '👤 Send your in-game nickname:',
        'invalid_uid': '❌ Please enter a valid ID! Digits only, 5 to 20 of them.',
        'invalid_username': '❌ Invalid username. Latin letters, digits and _ only (3 to 32 characters).',
        'invalid_nickname': '❌ The nickname must be 2 to 64 characters long.',
        'insufficient_funds': '❌ Not enough funds.\n\n💵 Balance: {balance} so\'m\n💰 Price: {price} so\'m\n'
                              '➖ Missing: <b>{shortfall} so\'m</b>',
        'order_created': '✅ Your order has been received!\n\n🆔 Order: <code>{order_id}</code>\n📦 {item}\n'
                         '🎮 ID: <code>{delivery_id}</code>\n💰 Amount: {price} so\'m\n\nAn admin will confirm it soon.',
        'order_cancelled_self': '🚫 Order <code>{order_id}</code> cancelled.{refund}',
        'order_confirmed_user': '✅ Your order is complete!\n\n🆔 <code>{order_id}</code>\n📦 {item}\n'
                                '🎮 ID: <code>{delivery_id}</code>\n💰 {price} so\'m\n💵 Balance: {balance} so\'m',
        'order_rejected_user': '❌ Your order was rejected.\n\n🆔 <code>{order_id}</code>\n📦 {item}\n'
                               '📝 Reason: {reason}{refund}',
        'order_cancelled_user': '🚫 Your order was cancelled.\n\n🆔 <code>{order_id}</code>\n📦 {item}\n'
                                '📝 Reason: {reason}{refund}',
        'refund_line': '\n💵 {price} so\'m returned to your balance.',
        'default_reject_reason': 'rejected by an admin',

        'ask_topup_amount': '💳 <b>Top up balance</b>\n\nHow much do you want to add? (min {min}, max {max} so\'m)',
        'invalid_amount': '❌ Please send digits only.',
        'topup_amount_out_of_range': '❌ The amount must be between {min} and {max} so\'m.',
        'topup_choose_card_for': '💳 {amount} so\'m. Choose a card to pay to:',
        'topup_choose_card': 'Please choose a card with the buttons.',
        'topup_send_receipt': 'Make the payment, then press "✅ I paid" or send a photo of the receipt.',
        'topup_payment_details': '💳 <b>{card}</b>\n\nCard: <code>{number}</code>\nOwner: {owner}\n'
                                 'Amount: <b>{amount} so\'m</b>\n\nAfter paying press "✅ I paid" '
                                 'or send a photo of the receipt.',
        'topup_submitted': '✅ Request received!\n\n🆔 <code>{request_id}</code>\n💵 {amount} so\'m\n\n'
                           'Your balance will be credited once an admin checks the payment.',
        'topup_unavailable': 'Top-ups are not available right now. Please contact the admin.',
        'topup_confirmed_user': '✅ {amount} so\'m added to your balance!\n💵 Balance: {balance} so\'m',
        'topup_rejected_user': '❌ Your payment of {amount} so\'m was not confirmed. Contact the admin with questions.',
        'unknown_card': '❌ Unknown card.',

        'ask_promo_code': '🎁 Send the promo code:',
        'promo_redeemed': '🎉 Promo code accepted! +{amount} so\'m\n💵 Balance: {balance} so\'m',
        'promo_not_found': '❌ Promo code not found.',
        'promo_already_used': '❌ You have already used this promo code.',
        'promo_exhausted': '❌ This promo code has expired or has no uses left.',

        'error_generic': '❌ Something went wrong. Please try again.',
        'error_validation': '❌ Invalid value.',
        'error_not_found': '❌ Not found.',
        'unknown_item': '❌ Invalid choice!',
        'order_not_found': '❌ Order not found!',
        'user_not_found': '❌ User not found.',
        'permission_denied': '❌ Insufficient permissions',
        'already_resolved': 'This order has already been handled: {status}',
        'no_active_flow': 'This action has expired. Please start again from the menu.',
        'unknown_action': '❌ Unknown action.',
        'invalid_price': '❌ Price must be a positive number.',
        'insufficient_funds_at_confirmation': '⚠️ The user does not have enough funds.\n'
                                              'Balance: {balance} so\'m, needed: {price} so\'m, '
                                              'missing: {shortfall} so\'m. The order stays pending.',

        'admin_panel': '👑 <b>Admin panel</b>\n\n👥 Total users: {users}\n📊 Bot status: ✅ Running\n\nChoose a section:',
        'btn_admin_stats': '📊 Statistics',
        'btn_admin_pending': '⏳ Pending orders',
        'btn_admin_broadcast': '📢 Broadcast',
        'btn_admin_find_user': '👥 Find user',
        'btn_admin_prices': '💲 Edit prices',
        'btn_admin_promo_create': '🎁 Create promo',
        'btn_admin_promo_list': '📋 Promo codes',
        'btn_admin_promo_clear': '🗑 Clear promo codes',
        'btn_user_message': '✉️ Message',
        'btn_user_add_balance': '➕ Add balance',
        'btn_user_sub_balance': '➖ Subtract balance',
        'admin_stats': '📊 <b>Bot statistics</b>\n\n👥 Total users: {users}\n💰 Top balances:\n{top}\n\n'
                       '📦 Orders: ⏳ {pending} | ✅ {completed} | ❌ {rejected} | 🚫 {cancelled}\n'
                       '💵 Revenue: {revenue} so\'m\n💳 Topped up: {topped_up} so\'m\n'
                       '⏳ Pending top-ups: {pending_topups}',
        'admin_top_user': '{place}. ID:{user_id} {name} - {balance} so\'m',
        'no_data': 'No data',
        'admin_new_order': '🛒 <b>New order</b> <code>{order_id}</code>\n\n👤 {user} (<code>{user_id}</code>)\n'
                           '🏷 {family}\n📦 {item}\n🎮 ID: <code>{delivery_id}</code>\n💰 Price: {price} so\'m\n'
                           '💵 Balance: {balance} so\'m\n🕐 {timing}',
        'admin_new_topup': '💳 <b>New top-up</b> <code>{request_id}</code>\n\n👤 {user} (<code>{user_id}</code>)\n'
                           '💵 Amount: {amount} so\'m\n💳 Card: {card}\n💰 Current balance: {balance} so\'m',
        'admin_order_cancelled': '🚫 Order <code>{order_id}</code> was cancelled by user <code>{user_id}</code>.',
        'timing_at_create': 'Funds taken when the order was placed',
        'timing_at_confirm': 'Funds are taken on confirmation',
        'review_confirmed': '✅ Confirmed ({admin})',
        'review_rejected': '❌ Rejected ({admin})',
        'review_closed': 'Status: {status}',
        'no_pending': '✅ Nothing is pending.',
        'pending_summary': '⏳ Pending: {orders} orders, {topups} top-ups.',
        'pending_order': '🛒 <code>{order_id}</code>\n👤 <code>{user_id}</code>\n📦 {item}\n'
                         '🎮 ID: <code>{delivery_id}</code>\n💰 {price} so\'m\n🕐 {created_at}',
        'pending_topup': '💳 <code>{request_id}</code>\n👤 <code>{user_id}</code>\n💵 {amount} so\'m ({card})\n'
                         '🕐 {created_at}',
        'ask_broadcast': '📢 <b>Broadcast</b>\n\nSend the message for all users:',
        'broadcast_started': '📤 Sending to {count} users...',
        'broadcast_done': '✅ Delivered: {delivered}\n❌ Failed: {failed}',
        'ask_find_user': '🔎 Send the user ID or @username:',
        'admin_user_card': '👤 <b>{name}</b>\n🆔 <code>{user_id}</code>\n💵 Balance: {balance} so\'m\n'
                           '📅 Joined: {join_date}\n👁 Last seen: {last_seen}',
        'ask_user_message': '✉️ Write the message for <code>{user_id}</code>:',
        'admin_message_to_user': '📩 <b>Message from the admin:</b>\n\n{text}',
        'user_message_sent': '✅ Message sent.',
        'user_message_failed': '❌ The message could not be delivered.',
        'ask_balance_add': '➕ How much to add to <code>{user_id}</code>?',
        'ask_balance_sub': '➖ How much to subtract from <code>{user_id}</code>?',
        'balance_updated': '✅ Balance of <code>{user_id}</code>: {balance} so\'m',
        'admin_choose_family': '💲 Choose a product family:',
        'admin_choose_item': '💲 <b>{title}</b>\n\nChoose the item to reprice:',
        'ask_new_price': '💲 {item}\nCurrent price: {price} so\'m\n\nSend the new price:',
        'price_updated': '✅ {item} now costs {price} so\'m',
        'ask_promo_amount': '🎁 Enter the promo amount (so\'m):',
        'ask_promo_uses': '🔢 How many users can redeem it?',
        'ask_promo_days': '📅 For how many days is it valid? (0 - no expiry)',
        'promo_invalid_uses': '❌ Uses must be between 1 and {max}.',
        'promo_invalid_days': '❌ Days must be between 0 and {max}.',
        'promo_created': '✅ Promo code created!\n\n🎁 <code>{code}</code>\n💵 {amount} so\'m\n🔢 {uses} uses\n'
                         '📅 Expires: {expires}',
        'promo_line': '🎁 <code>{code}</code> - {amount} so\'m, {uses_left}/{total}, {expires}',
        'no_promos': 'No active promo codes.',
        'promos_cleared': '🗑 {count} promo codes removed.',
        'never': 'never',
    },
}

LANGUAGES = tuple(TRANSLATIONS)


class _SafeFormat(dict):
    def __missing__(self, key):
        return '{' + key + '}'


def t(lang: str, key: str, **kwargs) -> str:
    """Return the text for ``key`` in ``lang``, falling back to the default language."""
    table = TRANSLATIONS.get(lang) or TRANSLATIONS[TgConfig.DEFAULT_LANGUAGE]
    template = table.get(key) or TRANSLATIONS[TgConfig.DEFAULT_LANGUAGE].get(key, key)
    if not kwargs:
        return template
    return template.format_map(_SafeFormat(kwargs))


def user_language(account) -> str:
    code = (getattr(account, 'language_code', '') or '').split('-')[0].lower()
    return code if code in TRANSLATIONS else TgConfig.DEFAULT_LANGUAGE
