"""
Bot copy and option menus for the dental chatbot (Vietnamese).
"""

GREETING_PROMPT = (
    "Xin chào! Tôi là trợ lý AI nha khoa. Tôi sẽ giúp bạn thăm khám răng miệng.\n\n"
    "Để bắt đầu, hãy cho tôi biết tên của bạn:"
)
NAME_REPROMPT = "Vui lòng cho tôi biết tên của bạn:"
AGE_PROMPT = "Cảm ơn {name}! Bây giờ hãy cho tôi biết tuổi của bạn:"
AGE_REPROMPT = "Vui lòng nhập tuổi hợp lệ (1-120):"
SYMPTOMS_PROMPT = (
    "Bạn {age} tuổi. Bây giờ hãy mô tả các triệu chứng bạn đang gặp phải:\n\n"
    "Ví dụ: đau răng, sưng nướu, chảy máu, răng lung lay, v.v."
)
PAIN_LEVEL_PROMPT = (
    "Tôi hiểu bạn đang gặp: {symptoms}\n\n"
    "Bây giờ hãy đánh giá mức độ đau của bạn từ 1-10 (1 = không đau, 10 = đau dữ dội):"
)
PAIN_LEVEL_REPROMPT = "Vui lòng nhập mức độ đau từ 1-10:"
LAST_VISIT_PROMPT = (
    "Mức độ đau: {pain_level}/10\n\n"
    "Lần cuối bạn đi khám răng là khi nào? (Ví dụ: 6 tháng trước, 1 năm trước, chưa bao giờ):"
)
SUMMARY_INTRO = "Cảm ơn bạn — mình đã lưu thông tin. Đây là đánh giá sơ bộ:\n\n{summary}"

# Deterministic intake summary lines
AGE_BRACKET_CHILD = "👶 **Nhóm tuổi:** Trẻ em/Thanh thiếu niên"
AGE_BRACKET_ADULT = "👨‍⚕️ **Nhóm tuổi:** Người trưởng thành"
AGE_BRACKET_SENIOR = "👴 **Nhóm tuổi:** Người cao tuổi"
SYMPTOM_LINES = [
    ("đau", "🦷 **Triệu chứng chính:** Đau răng"),
    ("sưng", "🦷 **Triệu chứng chính:** Sưng nướu"),
    ("chảy máu", "🦷 **Triệu chứng chính:** Chảy máu nướu"),
]
PAIN_MILD = "🟢 **Mức độ đau:** Nhẹ"
PAIN_MODERATE = "🟡 **Mức độ đau:** Trung bình"
PAIN_SEVERE = "🔴 **Mức độ đau:** Nghiêm trọng"
SUMMARY_RECOMMENDATION = "💡 **Khuyến nghị:** Cần khám bác sĩ nha khoa để đánh giá chi tiết"

EXPLANATION_MESSAGE = (
    "📚 **GIẢI THÍCH CHI TIẾT:**\n\n"
    "Dựa trên thông tin bạn cung cấp và kết quả phân tích AI, tôi khuyến nghị:\n\n"
    "1. **Khám bác sĩ nha khoa** trong vòng 1-2 tuần\n"
    "2. **Thực hiện các biện pháp vệ sinh** răng miệng đúng cách\n"
    "3. **Theo dõi triệu chứng** và báo cáo nếu có thay đổi\n\n"
    "Bạn có muốn tôi giúp đặt lịch khám không?"
)
BOOKING_MESSAGE = (
    "📅 **ĐẶT LỊCH KHÁM:**\n\n"
    "Để đặt lịch khám, vui lòng:\n\n"
    "📞 **Gọi điện:** 1900-xxxx\n"
    "🌐 **Website:** www.dentalclinic.com\n"
    "📱 **App:** Tải app DentalCare\n\n"
    "Hoặc bạn có thể đến trực tiếp phòng khám vào giờ hành chính.\n\n"
    "Bạn cần hỗ trợ gì thêm không?"
)
FAREWELL_MESSAGE = (
    "Cảm ơn bạn đã sử dụng dịch vụ thăm khám AI của chúng tôi!\n\n"
    "Chúc bạn sức khỏe tốt! 👋\n\n"
    "Nếu cần hỗ trợ thêm, hãy quay lại bất cứ lúc nào."
)
MENU_MESSAGE = "Bạn có thể chọn một trong các tùy chọn sau hoặc nhập tin nhắn của mình:"
SYMPTOM_HINT_MESSAGE = (
    "Tôi hiểu bạn đang gặp vấn đề về răng miệng. Hãy bắt đầu thăm khám để tôi có thể giúp bạn tốt hơn.\n\n"
    "Bạn có muốn bắt đầu thăm khám không?"
)
GENERAL_GREETING = (
    "Xin chào! Tôi là trợ lý AI nha khoa. Tôi có thể giúp bạn:\n\n"
    "1. Thăm khám răng miệng\n"
    "2. Phân tích ảnh X-quang\n"
    "3. Tư vấn sức khỏe răng miệng\n\n"
    "Bạn muốn làm gì?"
)
ANALYSIS_FAILED_MESSAGE = "❌ Không thể phân tích ảnh. Vui lòng thử lại hoặc liên hệ bác sĩ trực tiếp."

# Keyword triggers (matched against lower-cased input)
SYMPTOM_KEYWORDS = ["đau", "sưng", "chảy máu"]
EXPLAIN_KEYWORDS = ["giải thích", "thêm"]
BOOKING_KEYWORDS = ["đặt lịch", "khám"]
FAREWELL_KEYWORDS = ["kết thúc", "tạm biệt"]

# Option menus
SUMMARY_OPTIONS = ["Gửi ảnh X-quang", "Gửi ảnh răng miệng", "Tiếp tục", "Kết thúc"]
EXPLANATION_OPTIONS = ["Đặt lịch khám", "Hướng dẫn vệ sinh", "Kết thúc"]
BOOKING_OPTIONS = ["Hướng dẫn vệ sinh", "Tư vấn thêm", "Kết thúc"]
MENU_OPTIONS = ["Giải thích thêm", "Đặt lịch khám", "Hướng dẫn vệ sinh", "Kết thúc"]
SYMPTOM_HINT_OPTIONS = ["Bắt đầu thăm khám", "Gửi ảnh", "Tư vấn nhanh"]
GENERAL_OPTIONS = ["Thăm khám", "Gửi ảnh", "Tư vấn", "Kết thúc"]
ANALYSIS_OPTIONS = ["Giải thích thêm", "Đặt lịch khám", "Kết thúc"]

# Text sent on behalf of the client for non-text turns
WELCOME_TRIGGER = "xin chào"
UPLOAD_TRIGGER = "upload_image"
