"""
Operator-facing messages (Hindi, as shown on the desk)
"""

# Transport failures, one per gateway operation
FETCH_FAILED = 'डाटा लोड करने में विफल'
SAVE_FAILED = 'डाटा सुरक्षित करने में विफल'
DELETE_FAILED = 'डाटा हटाने में विफल'

# Fallbacks when the store reports failure without a reason
FETCH_ERROR = 'डाटा प्राप्त करने में त्रुटि'
SAVE_ERROR = 'डाटा सुरक्षित करने में त्रुटि'
DELETE_ERROR = 'हटाने में त्रुटि'

SAVE_SUCCESS = 'डाटा सफलतापूर्वक सुरक्षित किया गया!'
DELETE_SUCCESS = 'सदस्य सफलतापूर्वक हटाया गया!'

DUPLICATE_IDENTITY = 'आधार पहले से मौजूद है!'
WARNING_PENDING = 'पहले चेतावनी स्वीकार करें'
IMAGE_TOO_LARGE = 'फोटो बहुत बड़ी है, कृपया छोटी फोटो चुनें'
IMAGE_UNREADABLE = 'फोटो पढ़ी नहीं जा सकी'
EXTRACTION_FAILED = 'आधार से विवरण नहीं पढ़ा जा सका, कृपया दोबारा फोटो लें'
EXTRACTION_SUCCESS = 'आधार से विवरण भरे गए'
BUSY = 'कृपया प्रतीक्षा करें, पिछला अनुरोध जारी है'
NO_DRAFT = 'संपादन के लिए सदस्य चुनें'
RECORD_NOT_FOUND = 'सदस्य नहीं मिला'
NO_RESULTS = 'कोई परिणाम नहीं मिला'

# Error text used by the roll store when a code is unknown
MEMBER_NOT_FOUND = 'Member not found'
