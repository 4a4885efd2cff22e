import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import tagshelf.apps.files.infrastructure.identifiers


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Tag',
            fields=[
                ('id', models.CharField(default=tagshelf.apps.files.infrastructure.identifiers.generate_id, editable=False, max_length=21, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('color', models.CharField(default='#ffffff', help_text='Hex color code for UI display (e.g., #FF5733)', max_length=7, validators=[django.core.validators.RegexValidator('^#[0-9A-Fa-f]{6}$')])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tags', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Tag',
                'verbose_name_plural': 'Tags',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['user', 'name'], name='tags_user_name_idx')],
            },
        ),
        migrations.CreateModel(
            name='File',
            fields=[
                ('id', models.CharField(default=tagshelf.apps.files.infrastructure.identifiers.generate_id, editable=False, max_length=21, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('kind', models.CharField(choices=[('image', 'Image'), ('video', 'Video'), ('link', 'Link')], max_length=16)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='files', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'ordering': ['id'],
                'indexes': [models.Index(fields=['user', 'name'], name='files_user_name_idx')],
            },
        ),
        migrations.CreateModel(
            name='TagParent',
            fields=[
                ('child', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='parent_link', serialize=False, to='files.tag')),
                ('parent', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='child_links', to='files.tag')),
            ],
            options={
                'verbose_name': 'Tag parent',
                'verbose_name_plural': 'Tag parents',
                'db_table': 'files_subtag_of',
            },
        ),
        migrations.CreateModel(
            name='TagAssociation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('file', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='associations', to='files.file')),
                ('tag', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='associations', to='files.tag')),
            ],
            options={
                'verbose_name': 'Tag association',
                'verbose_name_plural': 'Tag associations',
                'db_table': 'files_has_tag',
                'indexes': [models.Index(fields=['tag', 'file'], name='has_tag_tag_file_idx')],
            },
        ),
        migrations.AddField(
            model_name='file',
            name='tags',
            field=models.ManyToManyField(blank=True, related_name='files', through='files.TagAssociation', to='files.tag'),
        ),
    ]
