# Operator console
OPERATOR_LOGIN = '/api/operator/login'
OPERATOR_LOGOUT = '/api/operator/logout'
OPERATOR_ME = '/api/operator/me'
ADMIN_TRIP_BASE = '/api/admin/trip'
ADMIN_TRIP_ITEM = '/api/admin/trip/{trip_id}'
ADMIN_BOOKING_BASE = '/api/admin/booking'
ADMIN_BOOKING_CANCEL = '/api/admin/booking/{booking_id}/cancel'
ADMIN_ESCALATION_BASE = '/api/admin/escalation'
ADMIN_ESCALATION_RESOLVE = '/api/admin/escalation/{escalation_id}/resolve'

# Passenger API
TRIP_SEARCH = '/api/trip/search'
TRIP_SEARCH_BY_ID = '/api/trip/search-by-id'
TRIP_GET = '/api/trip/{trip_id}'
TRIP_SEATS = '/api/trip/{trip_id}/seats'
IDENTITY_SEND_CODE = '/api/identity/send-code'
IDENTITY_VERIFY = '/api/identity/verify'
CHECKOUT_BASE = '/api/checkout'
CHECKOUT_GET = '/api/checkout/{session_id}'
CHECKOUT_HOLD = '/api/checkout/{session_id}/hold'
CHECKOUT_IDENTITY = '/api/checkout/{session_id}/identity'
CHECKOUT_EXTEND = '/api/checkout/{session_id}/extend'
CHECKOUT_PAYMENT = '/api/checkout/{session_id}/payment'
CHECKOUT_CANCEL = '/api/checkout/{session_id}/cancel'
PAYMENT_WEBHOOK = '/api/payment/webhook'
PAYMENT_VERIFY = '/api/payment/verify/{reference}'
