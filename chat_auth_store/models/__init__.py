from chat_auth_store.models.code_verifier import CodeVerifier
from chat_auth_store.models.conversation import Conversation
from chat_auth_store.models.customer_account_url import CustomerAccountUrl
from chat_auth_store.models.customer_token import CustomerToken
from chat_auth_store.models.message import Message
from chat_auth_store.models.shop_session import ShopSession

__all__ = [
    "CodeVerifier",
    "Conversation",
    "CustomerAccountUrl",
    "CustomerToken",
    "Message",
    "ShopSession",
]
