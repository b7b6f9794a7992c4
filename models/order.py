from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from models import db


class RestaurantOrder(db.Model):
    __tablename__ = "restaurant_orders"
    __table_args__ = (
        db.Index("ix_restaurant_orders_vendor_status", "vendor_id", "status"),
    )

    id = Column(String(64), primary_key=True)
    vendor_id = Column(String(64), index=True)
    author_id = Column(String(64))
    status = Column(String(50), nullable=False)
    # legacy amount columns, any of them may be empty, "null" or JSON encoded
    to_pay = Column(String(32))
    to_pay_amount = Column(String(32))
    grand_total = Column(String(32))
    total = Column(String(32))
    amount = Column(String(32))
    total_amount = Column(String(32))
    calculated_charges = Column(Text)
    products = Column(Text)
    admin_commission = Column(String(32))
    admin_commission_type = Column(String(20))
    created_at = Column(DateTime, default=func.now())

    def to_legacy_dict(self):
        """Order fields under the names the commission rules probe."""
        return {
            "id": self.id,
            "vendorID": self.vendor_id,
            "ToPay": self.to_pay,
            "toPayAmount": self.to_pay_amount,
            "grandTotal": self.grand_total,
            "total": self.total,
            "amount": self.amount,
            "totalAmount": self.total_amount,
            "calculatedCharges": self.calculated_charges,
            "products": self.products,
            "adminCommission": self.admin_commission,
        }
