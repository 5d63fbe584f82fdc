# ==========================================
# BLOCK 1. GLOBAL CONFIG & ENVIRONMENT
# ==========================================

# --- SERVICE ENDPOINT ---
# app.py lets the page override this through window.ANALYZER_API_URL
API_URL = "http://localhost:8080/analyze"

# Seconds before a pending request is abandoned. None = wait for the transport.
REQUEST_TIMEOUT_S = None

# --- DEBUG FLAGS ---
ANALYZER_DEBUG = False

# ==========================================
# BLOCK 2. STAGES
# ==========================================

STAGE_LEXICAL = "lexical"
STAGE_SYNTACTIC = "syntactic"
STAGE_SEMANTIC = "semantic"

# Order matters: each stage is gated by the one before it.
STAGES = (STAGE_LEXICAL, STAGE_SYNTACTIC, STAGE_SEMANTIC)

# Step ids used by the first front-end ('lex' / 'syn' / 'sem').
STAGE_ALIASES = {
    "lex": STAGE_LEXICAL,
    "syn": STAGE_SYNTACTIC,
    "sem": STAGE_SEMANTIC,
}

# Flat payload field prefixes: lex_errors, is_lex_valid, ...
STAGE_PREFIXES = {
    STAGE_LEXICAL: "lex",
    STAGE_SYNTACTIC: "syn",
    STAGE_SEMANTIC: "sem",
}

STAGE_BUTTON_LABELS = {
    STAGE_LEXICAL: "Análisis Léxico",
    STAGE_SYNTACTIC: "Análisis Sintáctico",
    STAGE_SEMANTIC: "Análisis Semántico",
}

STAGE_ERROR_HEADERS = {
    STAGE_LEXICAL: "❌ Errores Léxicos",
    STAGE_SYNTACTIC: "⚠️ Errores Sintácticos",
    STAGE_SEMANTIC: "🔍 Errores Semánticos",
}

STAGE_BUTTON_IDS = {
    STAGE_LEXICAL: "btn-lex",
    STAGE_SYNTACTIC: "btn-syn",
    STAGE_SEMANTIC: "btn-sem",
}

# ==========================================
# BLOCK 3. SESSION STATUS
# ==========================================

STATUS_IDLE = "idle"
STATUS_SUBMITTING = "submitting"

# ==========================================
# BLOCK 4. STATISTICS
# ==========================================

STAT_KEYS = (
    "total_tokens",
    "keywords",
    "identifiers",
    "symbols",
    "numbers",
    "strings",
    "comments",
)

# Cards shown in the stats grid (comments are counted but not carded)
STAT_CARD_KEYS = STAT_KEYS[:6]

STAT_LABELS = {
    "total_tokens": "Total Tokens",
    "keywords": "Palabras Reservadas",
    "identifiers": "Identificadores",
    "symbols": "Símbolos",
    "numbers": "Números",
    "strings": "Cadenas",
    "comments": "Comentarios",
}

# Grouped payload category -> token type tag
CATEGORY_TOKEN_TYPES = {
    "keywords": "keyword",
    "identifiers": "identifier",
    "symbols": "symbol",
    "numbers": "number",
    "strings": "string",
    "comments": "comment",
}

# Pseudo-category holding every stage's errors in the grouped payload
ERRORS_CATEGORY = "errors"

# ==========================================
# BLOCK 5. UI MESSAGES
# ==========================================

MSG_EMPTY_SOURCE = "Por favor ingresa código Java para analizar"
MSG_SERVICE_DOWN = (
    "Error al conectar con el servidor. "
    "Asegúrate de que la API esté corriendo en :8080"
)
MSG_BAD_SCHEMA = "No se pudo interpretar el resultado del análisis."
MSG_LOADING = "Analizando código..."
MSG_SUCCESS = "✅ ¡Código analizado correctamente! No se encontraron errores."
MSG_STAGE_VALID = "{label}: sin errores"
MSG_STAGE_INVALID = "{label}: {count} error(es)"
MSG_STAGE_BLOCKED = "{label}: bloqueado por errores previos"

TOKENS_HEADER = "📝 Tokens Identificados"
CATEGORY_HEADER = "📊 Tokens por Categoría"
NO_TOKENS_TEXT = "Sin tokens."

# ==========================================
# BLOCK 6. SAMPLE INPUT
# ==========================================

DEFAULT_SOURCE = """public class HolaMundo {
    public static void main(String[] args) {
        System.out.println("Hola Mundo desde Java!");

        int numero = 42;
        String nombre = "Java";

        for (int i = 0; i < 3; i++) {
            System.out.println("Iteración: " + i);
        }
    }
}"""
