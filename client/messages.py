"""User-facing client text (Hebrew)."""

APP_TITLE = "🗂️ אחסון קבצים"
GREETING = "שלום, {username}!"

LOGIN_SUCCESS = "התחברת בהצלחה!"
LOGIN_ERROR = "שגיאה בהתחברות"
REGISTER_SUCCESS = "נרשמת בהצלחה!"
REGISTER_ERROR = "שגיאה ברישום"
LOGOUT_SUCCESS = "התנתקת בהצלחה"
LOGIN_REQUIRED = "יש להתחבר תחילה"

LOAD_FILES_ERROR = "שגיאה בטעינת הקבצים"
MY_FILES = "הקבצים שלי ({count})"
NO_FILES = "עדיין לא העלית קבצים"
FILE_SIZE = "גודל: {size}"
FILE_TYPE = "סוג: {mime_type}"
FILE_UPLOADED_AT = "הועלה: {date}"

UPLOADING = "מעלה קובץ..."
UPLOAD_SUCCESS = "הקובץ הועלה בהצלחה!"
UPLOAD_ERROR = "שגיאה בהעלאת הקובץ"
UPLOAD_FILE_MISSING = "הקובץ {path} לא נמצא"

DOWNLOAD_SUCCESS = "הקובץ נשמר אל {path}"
DOWNLOAD_ERROR = "שגיאה בהורדת הקובץ"

DELETE_CONFIRM = "האם אתה בטוח שברצונך למחוק את הקובץ?"
DELETE_SUCCESS = "הקובץ נמחק בהצלחה"
DELETE_ERROR = "שגיאה במחיקת הקובץ"
DELETE_CANCELLED = "המחיקה בוטלה"

PROMPT_PASSWORD = "סיסמה: "
YES_ANSWERS = ("y", "yes", "כ", "כן")
