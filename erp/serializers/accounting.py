from ..models import Account, PosItem, PosTerminal, PosTransaction, Transaction
from .base import CamelModelSerializer


class AccountSerializer(CamelModelSerializer):
    sanitized_fields = ('name',)

    class Meta:
        model = Account
        fields = '__all__'
        # balance only moves through posted transactions
        read_only_fields = ['balance', 'created_at']


class TransactionSerializer(CamelModelSerializer):
    class Meta:
        model = Transaction
        fields = '__all__'
        read_only_fields = ['transaction_date', 'pos_transaction', 'created_at']


class PosTerminalSerializer(CamelModelSerializer):
    class Meta:
        model = PosTerminal
        fields = '__all__'
        read_only_fields = ['created_at']


class PosItemSerializer(CamelModelSerializer):
    class Meta:
        model = PosItem
        exclude = ['pos_transaction']
        read_only_fields = ['created_at']


class PosTransactionSerializer(CamelModelSerializer):
    items = PosItemSerializer(many=True, required=False)

    class Meta:
        model = PosTransaction
        fields = '__all__'
        read_only_fields = ['completed_at', 'created_at']
