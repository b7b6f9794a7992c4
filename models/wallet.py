from sqlalchemy import Column, String, Numeric, Text, DateTime, Boolean
from models import db


class WalletTransaction(db.Model):
    __tablename__ = "wallet"
    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    date = Column(DateTime, nullable=True)
    note = Column(Text, nullable=True)
    payment_method = Column(String(50), nullable=True)
    payment_status = Column(String(20), nullable=True)  # e.g. success, failed
    transaction_user = Column(String(20), nullable=True)  # user, driver, vendor
    is_topup = Column(Boolean, default=False)
    order_id = Column(String(64), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "amount": float(self.amount) if self.amount is not None else None,
            "date": self.date.isoformat() if self.date else None,
            "note": self.note,
            "payment_method": self.payment_method,
            "payment_status": self.payment_status,
            "isTopUp": bool(self.is_topup),
            "order_id": self.order_id,
        }


class Payout(db.Model):
    __tablename__ = "payouts"
    id = Column(String(64), primary_key=True)
    vendor_id = Column(String(64), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    note = Column(Text, nullable=True)
    admin_note = Column(Text, nullable=True)
    paid_date = Column(DateTime, nullable=True)
    payment_status = Column(String(20), nullable=True)
    withdraw_method = Column(String(50), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "vendorID": self.vendor_id,
            "amount": float(self.amount) if self.amount is not None else None,
            "note": self.note,
            "adminNote": self.admin_note,
            "paidDate": self.paid_date.isoformat() if self.paid_date else None,
            "paymentStatus": self.payment_status,
            "withdrawMethod": self.withdraw_method,
        }


class DriverPayout(db.Model):
    __tablename__ = "driver_payouts"
    id = Column(String(64), primary_key=True)
    driver_id = Column(String(64), nullable=False, index=True)
    vendor_id = Column(String(64), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    note = Column(Text, nullable=True)
    admin_note = Column(Text, nullable=True)
    paid_date = Column(DateTime, nullable=True)
    payment_status = Column(String(20), nullable=True)
    withdraw_method = Column(String(50), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "driverID": self.driver_id,
            "vendorID": self.vendor_id,
            "amount": float(self.amount) if self.amount is not None else None,
            "note": self.note,
            "adminNote": self.admin_note,
            "paidDate": self.paid_date.isoformat() if self.paid_date else None,
            "paymentStatus": self.payment_status,
            "withdrawMethod": self.withdraw_method,
        }
