"""
Configurações globais do Previsor Financeiro
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Carregar variáveis de ambiente
load_dotenv()

# === Diretórios ===
BASE_DIR = Path(__file__).parent
LOGS_DIR = Path(os.getenv("LOGS_DIR", str(BASE_DIR / "logs")))

# === Logging ===
APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = LOGS_DIR / "previsor.log"

# === Análise geral ===
MIN_TRANSACTIONS_FOR_ANALYSIS = int(os.getenv("MIN_TRANSACTIONS_FOR_ANALYSIS", "10"))

# === Previsão de gastos ===
MIN_FORECAST_MONTHS = 2
MIN_CONFIDENCE = 0.1
DEFAULT_CONFIDENCE = 0.5  # Série com um único valor

# === Detecção de anomalias ===
ANOMALY_Z_THRESHOLD = float(os.getenv("ANOMALY_Z_THRESHOLD", "2.0"))
ANOMALY_MEAN_MULTIPLIER = float(os.getenv("ANOMALY_MEAN_MULTIPLIER", "1.5"))
ANOMALY_REASON_FACTOR = 50  # "% acima da média" = z * 50
MAX_ANOMALIES = 10

# === Alertas de orçamento ===
BUDGET_ALERT_PERCENTAGE = float(os.getenv("BUDGET_ALERT_PERCENTAGE", "80"))

# === Sugestões de investimento ===
EMERGENCY_FUND_MONTHS = 6
INCOME_LOOKBACK_MONTHS = 3
DIVERSIFICATION_MIN_ASSETS = 3
DIVERSIFICATION_SHARE = 0.2
SURPLUS_INCOME_SHARE = 0.1

# Retornos anuais esperados (heurísticas fixas)
EXPECTED_RETURNS = {
    "emergency_fund": 0.10,   # Taxa Selic
    "diversification": 0.12,
    "new_opportunity": 0.15,
}

# === Cache de relatórios ===
CACHE_TTL_SECONDS = int(os.getenv("CACHE_TTL_SECONDS", "300"))
