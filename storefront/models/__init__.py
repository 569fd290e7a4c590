from storefront.models.user import User
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.models.coupon import Coupon
from storefront.models.order import Order
from storefront.models.order_item import OrderItem
from storefront.models.cart import CartItem
from storefront.models.review import Review
from storefront.models.download import DownloadGrant, RevokedDownloadToken
from storefront.models.blog import BlogPost
from storefront.models.contact import ContactSubmission
from storefront.models.setting import Setting
from storefront.models.site_visit import SiteVisit

# add ALL models here
