import core.validators
import django.contrib.auth.models
import django.contrib.auth.validators
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('email', models.EmailField(error_messages={'unique': 'A user with that email already exists.'}, help_text='Required. Enter a valid email address.', max_length=254, unique=True, verbose_name='email address')),
                ('mobile', models.CharField(blank=True, default='', help_text='Optional. Bangladeshi mobile number, e.g. 01712345678.', max_length=20, validators=[core.validators.validate_mobile_number], verbose_name='mobile number')),
                ('user_type', models.CharField(choices=[('tenant', 'Tenant'), ('owner', 'Owner'), ('admin', 'Admin')], default='tenant', help_text='Whether the account rents, owns listings or administers the site.', max_length=10, verbose_name='user type')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when the account was created.', verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the account was last updated.', verbose_name='updated at')),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['user_type'], name='core_user_user_ty_4f5d1c_idx')],
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='Listing',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(help_text='Title of the listing', max_length=200, verbose_name='title')),
                ('address', models.CharField(help_text='Street address of the property', max_length=300, verbose_name='address')),
                ('city', models.CharField(choices=[('Dhaka', 'Dhaka'), ('Chittagong', 'Chittagong'), ('Sylhet', 'Sylhet'), ('Khulna', 'Khulna'), ('Rajshahi', 'Rajshahi'), ('Barisal', 'Barisal')], help_text='City the property is located in', max_length=20, verbose_name='city')),
                ('listing_type', models.CharField(choices=[('mess', 'Mess'), ('hostel', 'Hostel')], help_text='Mess or hostel', max_length=10, verbose_name='listing type')),
                ('rent', models.DecimalField(decimal_places=2, help_text='Monthly rent', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='rent')),
                ('deposit', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Security deposit', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='deposit')),
                ('gender_allowed', models.CharField(choices=[('male', 'Male'), ('female', 'Female'), ('both', 'Both')], default='both', max_length=10, verbose_name='gender allowed')),
                ('description', models.TextField(blank=True, default='', verbose_name='description')),
                ('total_ratings', models.PositiveIntegerField(default=0, help_text='Number of reviews contributing to the average rating', verbose_name='total ratings')),
                ('average_rating', models.DecimalField(decimal_places=1, default=Decimal('0.0'), help_text='Overall rating from 0.0 to 5.0', max_digits=2, validators=[django.core.validators.MinValueValidator(Decimal('0.0'), message='Rating cannot be negative.'), django.core.validators.MaxValueValidator(Decimal('5.0'), message='Rating cannot exceed 5.0.')], verbose_name='average rating')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('owner', models.ForeignKey(help_text='Owner of this listing', on_delete=django.db.models.deletion.CASCADE, related_name='listings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'listing',
                'verbose_name_plural': 'listings',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['owner'], name='core_listin_owner_i_9b2e0a_idx'),
                    models.Index(fields=['city'], name='core_listin_city_3c1f7d_idx'),
                    models.Index(fields=['average_rating'], name='core_listin_average_5e8a42_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Booking',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('rejected', 'Rejected'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='pending', help_text='Current status of the booking', max_length=20, verbose_name='status')),
                ('move_in_date', models.DateField(help_text='Date the tenant wants to move in', verbose_name='move-in date')),
                ('notes', models.TextField(blank=True, default='', help_text='Optional message to the owner', verbose_name='notes')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('listing', models.ForeignKey(help_text='Listing being booked', on_delete=django.db.models.deletion.CASCADE, related_name='bookings', to='core.listing')),
                ('tenant', models.ForeignKey(help_text='Tenant making the booking', on_delete=django.db.models.deletion.CASCADE, related_name='tenant_bookings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'booking',
                'verbose_name_plural': 'bookings',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['listing'], name='core_bookin_listing_7d3a91_idx'),
                    models.Index(fields=['tenant'], name='core_bookin_tenant__2a6c4e_idx'),
                    models.Index(fields=['status'], name='core_bookin_status_0f9b3d_idx'),
                    models.Index(fields=['move_in_date'], name='core_bookin_move_in_6e1d58_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Review',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('food_rating', models.PositiveSmallIntegerField(validators=[core.validators.validate_rating_score], verbose_name='food rating')),
                ('cleanliness_rating', models.PositiveSmallIntegerField(validators=[core.validators.validate_rating_score], verbose_name='cleanliness rating')),
                ('safety_rating', models.PositiveSmallIntegerField(validators=[core.validators.validate_rating_score], verbose_name='safety rating')),
                ('owner_rating', models.PositiveSmallIntegerField(validators=[core.validators.validate_rating_score], verbose_name='owner rating')),
                ('facilities_rating', models.PositiveSmallIntegerField(validators=[core.validators.validate_rating_score], verbose_name='facilities rating')),
                ('study_rating', models.PositiveSmallIntegerField(validators=[core.validators.validate_rating_score], verbose_name='study environment rating')),
                ('text_review', models.TextField(help_text='Written feedback about the stay', verbose_name='review text')),
                ('owner_reply', models.TextField(blank=True, help_text='Reply from the listing owner (can be set once)', null=True, verbose_name='owner reply')),
                ('replied_at', models.DateTimeField(blank=True, null=True, verbose_name='replied at')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('booking', models.OneToOneField(help_text='Booking being reviewed (one review per booking)', on_delete=django.db.models.deletion.CASCADE, related_name='review', to='core.booking')),
                ('listing', models.ForeignKey(help_text='Listing being reviewed', on_delete=django.db.models.deletion.CASCADE, related_name='reviews', to='core.listing')),
                ('owner', models.ForeignKey(help_text='Owner of the listing when the review was written', on_delete=django.db.models.deletion.CASCADE, related_name='reviews_received', to=settings.AUTH_USER_MODEL)),
                ('tenant', models.ForeignKey(help_text='Tenant writing the review', on_delete=django.db.models.deletion.CASCADE, related_name='reviews_given', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'review',
                'verbose_name_plural': 'reviews',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['listing'], name='core_review_listing_4b8e27_idx'),
                    models.Index(fields=['tenant'], name='core_review_tenant__8c5f10_idx'),
                    models.Index(fields=['owner'], name='core_review_owner_i_1d7a63_idx'),
                    models.Index(fields=['created_at'], name='core_review_created_a9e2b4_idx'),
                ],
            },
        ),
    ]
