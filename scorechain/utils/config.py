import os
from dotenv import load_dotenv

load_dotenv()

_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _env_flag(name, default='false'):
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name, value):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


class Config:
    # Network (Sepolia testnet by default)
    RPC_URL = os.getenv('SEPOLIA_RPC_URL')
    CHAIN_ID = os.getenv('CHAIN_ID', '11155111')
    INJECT_POA_MIDDLEWARE = _env_flag('INJECT_POA_MIDDLEWARE')

    # Signer
    PRIVATE_KEY = os.getenv('WALLET_PRIVATE_KEY')

    # CreditScore contract
    CONTRACT_ADDRESS = os.getenv(
        'CONTRACT_ADDRESS',
        '0x04Dd1eBa17E0d633feB0767439EF4cF1A722fc57'
    )
    CREDIT_SCORE_ABI_PATH = os.getenv(
        'CREDIT_SCORE_ABI_PATH',
        os.path.join(_PACKAGE_DIR, 'contracts', 'credit_score_abi.json')
    )

    # Service
    SERVICE_NAME = 'scorechain'
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    API_HOST = os.getenv('API_HOST', '0.0.0.0')
    API_PORT = os.getenv('API_PORT', '8000')

    @classmethod
    def validate(cls):
        """Validate all required config is present and well-formed"""
        required = {
            'RPC_URL': 'SEPOLIA_RPC_URL',
            'PRIVATE_KEY': 'WALLET_PRIVATE_KEY',
            'CONTRACT_ADDRESS': 'CONTRACT_ADDRESS',
        }

        missing = [env for key, env in required.items() if not getattr(cls, key)]

        if missing:
            raise ValueError(f"Missing required config: {', '.join(missing)}")

        cls.chain_id()
        cls.api_port()

    @classmethod
    def chain_id(cls):
        return _env_int('CHAIN_ID', cls.CHAIN_ID)

    @classmethod
    def api_port(cls):
        return _env_int('API_PORT', cls.API_PORT)
